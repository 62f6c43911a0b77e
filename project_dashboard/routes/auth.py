"""Sign-in routes for the Project Analytics Dashboard.

The identity provider authenticates the user and hands the verified
identity back as a signed token, either posted to /sign-in or passed as
the `token` query argument of its redirect. These routes check the
token and manage the Flask session.
"""
from flask import (
    Blueprint, current_app, jsonify, redirect, render_template, request, url_for,
)

from project_dashboard.auth import (
    current_auth,
    sign_in_user,
    sign_out_user,
    verify_sign_in_token,
)
from project_dashboard.exceptions import Unauthorized

auth_bp = Blueprint('auth', __name__)


def _complete_sign_in(token):
    """Verify a hand-off token and sign its user in.

    Returns:
        Redirect to the dashboard, 400 if the token or user_id is
        missing, or 401 if the token does not verify.
    """
    if not token:
        return jsonify({'error': 'Missing required field: token'}), 400

    try:
        claims = verify_sign_in_token(
            token,
            current_app.config.get('SIGN_IN_SECRET'),
            current_app.config.get('SIGN_IN_TOKEN_MAX_AGE', 300),
        )
    except Unauthorized as e:
        current_app.logger.warning('Rejected sign-in token from %s', request.remote_addr)
        return jsonify({'error': e.message}), 401

    try:
        auth = sign_in_user(
            claims.get('user_id', ''),
            claims.get('first_name'),
            claims.get('last_name'),
        )
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    current_app.logger.info('User %s signed in', auth.user_id)
    return redirect(url_for('dashboard.dashboard'))


@auth_bp.route('/sign-in', methods=['GET'])
def sign_in_page():
    """Render the sign-in prompt, or finish a redirect hand-off.

    Query params:
        token: Signed identity from the identity provider's redirect.
    """
    if 'token' in request.args:
        return _complete_sign_in(request.args.get('token'))
    if current_auth().is_signed_in:
        return redirect(url_for('dashboard.dashboard'))
    return render_template('sign_in.html')


@auth_bp.route('/sign-in', methods=['POST'])
def sign_in():
    """Store the identity handed off by the identity provider.

    Form or JSON fields:
        token: Identity signed with SIGN_IN_SECRET (required).
    """
    data = request.get_json(silent=True) or request.form
    return _complete_sign_in(data.get('token'))


@auth_bp.route('/sign-out', methods=['POST'])
def sign_out():
    """Clear the session and return to the sign-in prompt."""
    sign_out_user()
    return redirect(url_for('auth.sign_in_page'))
