import atexit
import logging

from clubhub import create_app, shutdown_db

# Create the app instance using the factory
app = create_app()

# Close pooled connections when the process exits
atexit.register(shutdown_db, app)

if __name__ == '__main__':
    # Set up logging
    logging.basicConfig(level=app.config['LOG_LEVEL'])

    # A production server (like Gunicorn) will run the app directly.
    app.run(port=app.config['PORT'], debug=app.config.get('DEBUG', False))
