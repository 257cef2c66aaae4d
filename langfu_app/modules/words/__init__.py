"""Word review tracking: scheduler, ledger and the related API."""
from flask import Blueprint

words_bp = Blueprint('words', __name__)
