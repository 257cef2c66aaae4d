# File: langfu_app/modules/ai_services/__init__.py
# Blueprint for the AI generation endpoints.

from flask import Blueprint

ai_services_bp = Blueprint('ai_services', __name__)
