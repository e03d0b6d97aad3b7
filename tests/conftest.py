"""
Test configuration and fixtures for the entry form application.
"""
import pytest
from entryform import create_app, mail


@pytest.fixture
def app(tmp_path):
    """Create application for testing with the roster log under tmp_path."""
    app = create_app('testing', {
        'ROSTER_DATA_DIR': str(tmp_path / 'data'),
        'WORK_EMAIL': 'work@example.com',
        'MAIL_DEFAULT_SENDER': 'noreply@example.com',
    })
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def roster_log(app):
    """Roster log handle used by the application."""
    return app.extensions['roster_log']


@pytest.fixture
def mailer(app):
    """Submission mailer used by the application."""
    return app.extensions['submission_mailer']


@pytest.fixture
def outbox(app):
    """Messages handed to Flask-Mail during the test (sending is suppressed)."""
    with mail.record_messages() as outbox:
        yield outbox


@pytest.fixture
def star_payload():
    """Single-participant entry from the Звезда club."""
    return {
        'city': 'Мытищи',
        'club': 'Звезда',
        'coach': 'Иванова И.И.',
        'participants': [
            {'name': 'Петрова А.', 'birthYear': '2012'},
        ],
    }


@pytest.fixture
def full_payload():
    """Entry with every field filled in and three participants."""
    return {
        'date': '12.10.2025',
        'city': '  Королёв ',
        'club': 'СШ «Грация»',
        'contacts': '+7 900 000-00-00, grace@example.com',
        'coach': 'Смирнова О.П.',
        'judge': 'Кузнецова Е.В.',
        'judgeCategory': '1 категория',
        'participants': [
            {'name': 'Орлова М.', 'birthYear': '2013', 'hasRank': '2 юн.', 'performingRank': '1 юн.', 'medicalVisa': 'Есть'},
            {'name': 'Белова К.', 'birthYear': '2014', 'hasRank': 'Нет', 'performingRank': '3 юн.', 'medicalVisa': 'Есть'},
            {'name': 'Зайцева Д.', 'birthYear': '2012', 'hasRank': '1 юн.', 'performingRank': '2 сп.', 'medicalVisa': 'Нет'},
        ],
    }
