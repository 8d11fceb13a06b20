from flask import Blueprint, jsonify
from flask_login import login_required, current_user

main = Blueprint('main', __name__)

@main.route('/health')
def health():
    return jsonify({'ok': True})

@main.route('/me')
@login_required
def me():
    return jsonify({'user': current_user.to_dict()})
