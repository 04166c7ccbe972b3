"""Route modules mounted by :func:`weekboard.api.app.create_app`."""
