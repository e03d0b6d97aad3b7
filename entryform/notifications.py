# Standard library imports
import re

# Third-party imports
from flask_mail import Message

# Local application imports
from entryform.documents import DOCX_MIMETYPE

FILENAME_PREFIX = 'Заявка_'
FILENAME_FALLBACK = 'Заявка'
DOCUMENT_EXTENSION = '.docx'
SUBJECT_PREFIX = 'Заявка: '
SUBJECT_FALLBACK = 'без названия'

UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\n\r]+')
WHITESPACE = re.compile(r'\s+')


def sanitize_filename(name):
    """
    Make a club name safe for use inside a filename.

    Runs of filesystem-unsafe characters become a single underscore and
    whitespace is collapsed. Applying it twice gives the same result.

    Args:
        name (str): Club name as typed on the form.

    Returns:
        str: Sanitized name.
    """
    sanitized = UNSAFE_FILENAME_CHARS.sub('_', name)
    return WHITESPACE.sub(' ', sanitized).strip()


def attachment_filename(submission):
    """Filename of the rendered document, e.g. ``Заявка_Звезда.docx``."""
    return f'{FILENAME_PREFIX}{sanitize_filename(submission.club or FILENAME_FALLBACK)}{DOCUMENT_EXTENSION}'


def subject_for(submission):
    return f'{SUBJECT_PREFIX}{submission.club or SUBJECT_FALLBACK}'


def summary_body(submission):
    """Plain-text summary sent as the email body."""
    lines = [
        f'Клуб/школа: {submission.club or "-"}',
        f'Город: {submission.city or "-"}',
        f'Тренер: {submission.coach or "-"}',
        f'Контакты: {submission.contacts or "-"}',
        f'Судья: {submission.judge_line or "-"}',
        f'Участниц: {submission.participant_count}',
    ]
    return '\n'.join(lines)


class SubmissionMailer:
    """
    Sends rendered entry forms to the operational mailbox.

    Wraps the Flask-Mail extension together with the fixed sender and
    recipient. Exactly one delivery attempt is made per call; transport
    errors propagate to the caller.
    """

    def __init__(self, mail, sender, recipient):
        self.mail = mail
        self.sender = sender
        self.recipient = recipient

    def build_message(self, submission, document):
        msg = Message(
            subject=subject_for(submission),
            recipients=[self.recipient],
            sender=self.sender
        )
        msg.body = summary_body(submission)
        msg.attach(attachment_filename(submission), DOCX_MIMETYPE, document)
        return msg

    def send(self, submission, document):
        """
        Email the document for a submission.

        Args:
            submission (Submission): Normalized submission (subject and body text).
            document (bytes): Rendered .docx bytes.

        Returns:
            Message: The message handed to the transport.
        """
        msg = self.build_message(submission, document)
        self.mail.send(msg)
        return msg
