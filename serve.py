from isbnkit import create_app
from isbnkit.services import parse

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "parse": parse,
        "ranges": app.extensions['isbn_ranges'],
    }


if __name__ == '__main__':
    app.run(debug=True)
