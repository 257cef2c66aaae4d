# File: langfu_app/modules/auth/__init__.py
from flask import Blueprint

auth_bp = Blueprint('auth', __name__)
