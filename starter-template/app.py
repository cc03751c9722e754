"""
Showcase Starter Template
=========================

A ready-to-run Flask application with every Showcase module enabled.

Run with:
    python app.py

Visit:
    http://localhost:5000/api/projects        - Projects (public)
    http://localhost:5000/api/auth/signin/google - Admin sign-in
    http://localhost:5000/health              - Health check
"""

from flask import Flask, jsonify
from showcase import Showcase

from config import Config

# Create Flask app
app = Flask(__name__)
app.config.from_object(Config)

# Initialize Showcase - this registers all modules automatically
showcase = Showcase(app)


# =============================================================================
# Your Routes - Add your own routes below
# =============================================================================

@app.route('/')
def index():
    """API index"""
    return jsonify({'modules': showcase.get_registered_modules()})


# =============================================================================
# Run the app
# =============================================================================

if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("Showcase Starter Template")
    print("=" * 60)
    print(f"Projects API:    http://localhost:5000/api/projects")
    print(f"Admin Sign-in:   http://localhost:5000/api/auth/signin/google")
    print(f"Health:          http://localhost:5000/health")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=5000, debug=True)
