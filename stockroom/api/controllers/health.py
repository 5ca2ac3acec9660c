"""
Health check endpoints
"""

from flask import Blueprint, jsonify
from datetime import datetime
from sqlalchemy import text
import os
import logging

from stockroom.database import db

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health():
    """Main health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'service': os.environ.get('NAME', 'stockroom'),
        'timestamp': datetime.utcnow().isoformat() + 'Z',
        'version': os.environ.get('VERSION', '1.0.0'),
        'environment': os.environ.get('FLASK_ENV', 'development'),
    }), 200


@health_bp.route('/health/ready', methods=['GET'])
def readiness():
    """Readiness probe - checks the database answers"""
    try:
        db.session.execute(text('SELECT 1'))
        return jsonify({
            'status': 'ready',
            'service': 'stockroom',
            'timestamp': datetime.utcnow().isoformat() + 'Z',
            'checks': {'database': 'ok'}
        }), 200
    except Exception as e:
        logger.error(f'Readiness check failed: {e}')
        return jsonify({
            'status': 'not ready',
            'service': 'stockroom',
            'timestamp': datetime.utcnow().isoformat() + 'Z',
            'error': 'Readiness check failed',
        }), 503


@health_bp.route('/health/live', methods=['GET'])
def liveness():
    return jsonify({
        'status': 'alive',
        'service': 'stockroom',
        'timestamp': datetime.utcnow().isoformat() + 'Z'
    }), 200
