from flask import Blueprint

# Define the blueprint
auth_bp = Blueprint('auth', __name__)

# Import the routes to register them with the blueprint
from . import routes
