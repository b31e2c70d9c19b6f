"""Uploader/viewer side: image loading, gateway calls, session state and speech."""
