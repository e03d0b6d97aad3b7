import os

class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Request bodies larger than this are rejected with 413
    MAX_CONTENT_LENGTH = 2 * 1024 * 1024

    # Roster log storage (relative to the process working directory)
    ROSTER_DATA_DIR = os.environ.get('ROSTER_DATA_DIR') or os.path.join(os.getcwd(), 'data')
    ROSTER_LOG_FILENAME = 'submissions.xlsx'

    # Email configuration
    MAIL_SERVER = os.environ.get('MAIL_SERVER') or os.environ.get('SMTP_HOST')
    MAIL_PORT = int(os.environ.get('MAIL_PORT') or os.environ.get('SMTP_PORT') or 587)
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'false').lower() in ['true', 'on', '1']
    MAIL_USE_SSL = os.environ.get('MAIL_USE_SSL', 'true').lower() in ['true', 'on', '1']
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME') or os.environ.get('SMTP_USER')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD') or os.environ.get('SMTP_PASS')
    MAIL_DEFAULT_SENDER = os.environ.get('FROM_EMAIL') or 'noreply@example.com'
    ADMINS = ['your-email@example.com']

    # Mailbox that receives every rendered entry form
    WORK_EMAIL = os.environ.get('WORK_EMAIL') or 'you@example.com'

    # Rate limiting for the public endpoints
    SUBMIT_RATE_LIMIT = '20 per hour'

    PORT = int(os.environ.get('PORT') or 3000)


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    MAIL_SUPPRESS_SEND = os.environ.get('MAIL_SUPPRESS_SEND', 'false').lower() in ['true', 'on', '1']


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    MAIL_SUPPRESS_SEND = True
    RATELIMIT_ENABLED = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
