from leaderboard import create_app, socketio

app = create_app()

if __name__ == '__main__':
    port = app.config['PORT']
    app.logger.info(f"Server is running on http://localhost:{port}/leaderboard")
    app.logger.info(f"Socket.IO subscriptions on namespace /leaderboard at port {port}")
    # SocketIO server serves both the HTTP endpoint and subscriptions.
    # The Werkzeug dev server is only allowed in debug; otherwise run under eventlet/gevent.
    socketio.run(app, host='0.0.0.0', port=port, debug=app.debug, allow_unsafe_werkzeug=app.debug)
