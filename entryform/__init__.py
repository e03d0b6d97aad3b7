from flask import Flask
from flask_mail import Mail
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import logging
from logging.handlers import SMTPHandler, RotatingFileHandler
import os

# Initialize extensions
mail = Mail()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per day", "50 per hour"]
)


def create_app(config_name='development', config_overrides=None):
    """Application factory function"""
    app = Flask(__name__)

    # Load configuration
    from config import config
    app.config.from_object(config[config_name])
    if config_overrides:
        app.config.update(config_overrides)

    # Initialize extensions
    mail.init_app(app)
    limiter.init_app(app)

    # Configure logging
    configure_logging(app)

    # Roster log and mailer used by the submission pipeline
    register_services(app)

    # Register middleware
    register_middleware(app)

    # Register blueprints/routes
    register_routes(app)

    from entryform.audit import audit_log_system_event
    with app.app_context():
        audit_log_system_event('STARTUP', f'Entry form application started ({config_name})')

    return app


def configure_logging(app):
    """Configure logging for the application"""
    # Ensure instance/logs directory exists
    logs_dir = os.path.join(app.instance_path, 'logs')
    if not os.path.exists(logs_dir):
        os.makedirs(logs_dir)

    # Always log to file (even in debug mode)
    # app.logger is shared by every app built in this process, so attach once
    app_log_path = os.path.abspath(os.path.join(logs_dir, 'app.log'))
    if not _has_handler(app.logger, RotatingFileHandler, baseFilename=app_log_path):
        file_handler = RotatingFileHandler(app_log_path, maxBytes=10240, backupCount=10, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

    # Set appropriate log level
    if app.debug:
        app.logger.setLevel(logging.DEBUG)
    else:
        app.logger.setLevel(logging.INFO)

    # Email notifications for production errors only
    if (not app.debug and not app.testing and app.config.get('MAIL_SERVER')
            and not _has_handler(app.logger, SMTPHandler)):
        auth = None
        if app.config['MAIL_USERNAME'] or app.config['MAIL_PASSWORD']:
            auth = (app.config['MAIL_USERNAME'], app.config['MAIL_PASSWORD'])
        secure = None
        if app.config['MAIL_USE_TLS']:
            secure = ()
        mail_handler = SMTPHandler(
            mailhost=(app.config['MAIL_SERVER'], app.config['MAIL_PORT']),
            fromaddr='no-reply@' + app.config['MAIL_SERVER'],
            toaddrs=app.config['ADMINS'], subject='Entry Form Failure',
            credentials=auth, secure=secure)
        mail_handler.setLevel(logging.ERROR)
        app.logger.addHandler(mail_handler)

    app.logger.info('Entry form application startup')


def _has_handler(logger, handler_class, **attrs):
    return any(
        isinstance(handler, handler_class)
        and all(getattr(handler, name, None) == value for name, value in attrs.items())
        for handler in logger.handlers
    )


def register_services(app):
    """Build the roster log and mailer handles and attach them to the app"""
    from entryform.roster.workbook import RosterLog
    from entryform.notifications import SubmissionMailer

    roster_path = os.path.join(app.config['ROSTER_DATA_DIR'], app.config['ROSTER_LOG_FILENAME'])
    app.extensions['roster_log'] = RosterLog(roster_path)
    app.extensions['submission_mailer'] = SubmissionMailer(
        mail,
        sender=app.config['MAIL_DEFAULT_SENDER'],
        recipient=app.config['WORK_EMAIL']
    )
    app.logger.debug(f"Roster log at {roster_path}, mail to {app.config['WORK_EMAIL']}")


def register_middleware(app):
    """Register middleware functions"""

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        # Content Security Policy (the form page uses inline script and style)
        response.headers['Content-Security-Policy'] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "connect-src 'self';"
        )

        # X-Content-Type-Options
        response.headers['X-Content-Type-Options'] = 'nosniff'

        # X-Frame-Options
        response.headers['X-Frame-Options'] = 'DENY'

        # Referrer Policy
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        return response


def register_routes(app):
    """Register application routes via blueprints"""
    from entryform.main import bp as main_bp
    from entryform.submissions import bp as submissions_bp
    from entryform.roster import bp as roster_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(submissions_bp)
    app.register_blueprint(roster_bp)

    # Register error handlers
    from entryform.errors import register_error_handlers
    register_error_handlers(app)
