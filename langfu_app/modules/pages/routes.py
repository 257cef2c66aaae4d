# File: langfu_app/modules/pages/routes.py
# Server-rendered pages: sign-in, sign-up and the learner dashboard.
from flask import redirect, render_template, request, url_for

from langfu_app.core.error_handlers import LangFuError
from langfu_app.models import Language
from langfu_app.modules.auth.gate import clear_auth_cookie, current_user, set_auth_cookie
from langfu_app.modules.auth.services.auth_service import AuthService
from langfu_app.modules.progress.services.progress_service import ProgressService
from langfu_app.modules.words.services.word_history_service import WordHistoryService
from . import pages_bp


def _signed_in_redirect(user):
    response = redirect(url_for('pages.dashboard'))
    return set_auth_cookie(response, AuthService.issue_token(user))


@pages_bp.route('/')
def index():
    if current_user:
        return redirect(url_for('pages.dashboard'))
    return redirect(url_for('pages.login'))


@pages_bp.route('/login', methods=['GET', 'POST'])
def login():
    if request.method == 'GET':
        return render_template('auth/login.html')

    email = (request.form.get('email') or '').strip()
    password = request.form.get('password') or ''
    if not email or not password:
        return render_template('auth/login.html', error='Email and password are required', email=email), 400
    try:
        user = AuthService.login(email, password)
    except LangFuError as exc:
        return render_template('auth/login.html', error=exc.message, email=email), exc.status_code
    return _signed_in_redirect(user)


@pages_bp.route('/register', methods=['GET', 'POST'])
def register():
    if request.method == 'GET':
        return render_template('auth/register.html')

    email = (request.form.get('email') or '').strip()
    password = request.form.get('password') or ''
    name = (request.form.get('name') or '').strip() or None
    if not email or not password:
        return render_template('auth/register.html', error='Email and password are required', email=email), 400
    try:
        user = AuthService.register_user(email, password, name)
    except LangFuError as exc:
        return render_template('auth/register.html', error=exc.message, email=email), exc.status_code
    return _signed_in_redirect(user)


@pages_bp.route('/logout')
def logout():
    return clear_auth_cookie(redirect(url_for('pages.login')))


@pages_bp.route('/dashboard')
def dashboard():
    language = current_user.current_language
    progress = ProgressService.get_progress(current_user.user_id, language)
    due = WordHistoryService.due_words(current_user.user_id, language, limit=current_user.daily_goal)
    return render_template(
        'dashboard/index.html',
        user=current_user,
        language=Language.parse(language),
        progress=progress,
        due_words=due,
    )
