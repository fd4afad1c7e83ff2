from writing_practice import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server so state_update pushes reach the browser
    socketio.run(app, debug=True)
