from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from fingle.schemas import LeaderboardQuery, parse_input
from fingle.services.game.leaderboard import get_leaderboard


leaderboard = Blueprint('leaderboard', __name__)


@leaderboard.route('/', methods=['GET'])
@login_required
def standings():
    query = parse_input(LeaderboardQuery, request.args.to_dict())
    rows = get_leaderboard(current_user.id, query.scope, query.window)
    return jsonify({
        'leaderboard': rows,
        'scope': query.scope.value,
        'window': query.window.value,
    })
