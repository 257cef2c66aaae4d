# File: langfu_app/modules/library/__init__.py
from flask import Blueprint

library_bp = Blueprint('library', __name__)
