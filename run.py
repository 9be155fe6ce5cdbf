# Import the factory function from app.py
from app import create_app
from config import DevelopmentConfig

# Create a development application instance
app = create_app(config_class=DevelopmentConfig)

if __name__ == '__main__':
    # The debug setting is controlled from config.py
    app.run(debug=app.config.get('DEBUG', False))
