from portfolio_cms import create_app
from portfolio_cms.extensions import socketio

app = create_app()

if __name__ == '__main__':
    # socketio.run so the admin moderation feed works
    socketio.run(app, debug=app.config.get("DEBUG", False), port=5000)
