from flask import Flask
from config import Config

from isbnkit.services.ranges import get_range_table, set_default_range_file
from isbnkit.utils.logging_config import setup_logging


def create_app(config_class=Config, **overrides):
    app = Flask(__name__)
    settings = config_class(**overrides)
    app.config.update(settings.model_dump())
    app.json.sort_keys = app.config['JSON_SORT_KEYS']

    setup_logging(app.config['LOG_LEVEL'], json_output=app.config['LOG_JSON'])

    # Loaded once at startup; a missing or broken dataset stops the app here
    app.extensions['isbn_ranges'] = get_range_table(app.config['ISBN_RANGES_FILE'])
    set_default_range_file(app.config['ISBN_RANGES_FILE'])

    from isbnkit.routes import bp as api_blueprint
    app.register_blueprint(api_blueprint)

    from isbnkit.commands import register_commands
    register_commands(app)

    return app
