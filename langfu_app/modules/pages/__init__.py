# File: langfu_app/modules/pages/__init__.py
from flask import Blueprint

pages_bp = Blueprint('pages', __name__)
