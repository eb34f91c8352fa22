"""Flask-SocketIO server for planning poker rooms."""
