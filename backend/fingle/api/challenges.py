from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from fingle.schemas import CountPreviewInput, CreateChallengeInput, GuessInput, parse_input
from fingle.services.game import challenges as svc


challenges = Blueprint('challenges', __name__)


@challenges.route('/', methods=['POST'])
@login_required
def create_challenge():
    photo = request.files.get('photo')
    params = parse_input(CreateChallengeInput, request.form.to_dict())
    data = photo.read() if photo else b''
    challenge = svc.create_challenge(current_user, params, data, photo.filename if photo else '')
    payload = challenge.to_dict()
    payload['sender'] = current_user.to_public_dict()
    return jsonify({'challenge': payload}), 201


@challenges.route('/received', methods=['GET'])
@login_required
def received():
    return jsonify({'challenges': svc.received_challenges(current_user.id)})


@challenges.route('/sent', methods=['GET'])
@login_required
def sent():
    return jsonify({'challenges': svc.sent_challenges(current_user.id)})


@challenges.route('/<int:challenge_id>/check-count', methods=['POST'])
@login_required
def check_count(challenge_id):
    params = parse_input(CountPreviewInput, request.get_json(silent=True))
    is_correct = svc.preview_count(challenge_id, current_user.id, params.finger_count_guess)
    return jsonify({'isCorrect': is_correct})


@challenges.route('/<int:challenge_id>/guess', methods=['POST'])
@login_required
def submit_guess(challenge_id):
    params = parse_input(GuessInput, request.get_json(silent=True))
    committed = svc.commit_guess(challenge_id, current_user.id, params.finger_count_guess, params.fingers)
    return jsonify({
        'guess': committed['guess'].to_dict(),
        'result': committed['result'],
    })
