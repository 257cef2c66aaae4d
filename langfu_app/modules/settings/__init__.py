# File: langfu_app/modules/settings/__init__.py
from flask import Blueprint

settings_bp = Blueprint('settings', __name__)
