from flask import Blueprint, jsonify
from pmtrumps import registry

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Prime Minister Trumps server!'})


@main.route('/health')
def health():
    return jsonify({'status': 'healthy', 'rooms': len(registry), 'cards': len(registry.catalog)})
