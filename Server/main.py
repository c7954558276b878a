"""
Slovo Boi Game Server - Main Entry Point

Creates the Flask-SocketIO application and starts serving.
"""

import os

from slovo import create_app
from slovo.config import config
from slovo.utils.game_logger import game_logger


def main():
    """Main function to create the application and start the server."""
    config_class = config[os.getenv('FLASK_ENV', 'default')]

    try:
        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        print("✓ Flask application created successfully")

        word_source = app.session_service.word_source
        for language in word_source.languages:
            print(f"✓ Words loaded for '{language}': lengths {word_source.word_lengths(language)}")

        game_logger.logger.info("Slovo Boi server starting")
        log_stats = game_logger.get_log_stats()
        if 'error' not in log_stats:
            print(f"✓ Logging to {log_stats['log_file']} ({log_stats['total_entries']} entries today)")

        print(f"\nStarting Slovo Boi server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print("=" * 50)

        # Start the server
        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG,
                     allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Slovo Boi server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
