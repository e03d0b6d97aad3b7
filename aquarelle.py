import os

from dotenv import load_dotenv

load_dotenv()

from entryform import create_app

app = create_app(os.getenv('FLASK_CONFIG') or 'development')

if __name__ == '__main__':
    app.run(port=app.config['PORT'], debug=app.debug)
