"""
Configuration for the Tax Estimator API
"""

import os

# Tax Configuration
TAX_YEAR = 2025

# Server Configuration
HOST = os.environ.get('TAX_ESTIMATOR_HOST', '0.0.0.0')
PORT = int(os.environ.get('TAX_ESTIMATOR_PORT', 5001))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get('TAX_ESTIMATOR_CORS_ORIGINS', '*').split(',')
    if origin.strip()
]

# Upload Configuration
ALLOWED_EXTENSIONS = {'csv'}
MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # 1MB, an inputs CSV is a dozen rows

# Logging
LOG_LEVEL = os.environ.get('TAX_ESTIMATOR_LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
