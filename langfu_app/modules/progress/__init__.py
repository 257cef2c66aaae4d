"""Per-language progress rollup."""
from flask import Blueprint

progress_bp = Blueprint('progress', __name__)
