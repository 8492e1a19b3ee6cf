# {{ Copyright }}
# Author: {{ Author }}
"""{{ ProjectName }} -- Flask application created {{ Date }}."""

from flask import Flask

app = Flask(__name__)


@app.route("/")
def index() -> str:
    return "Hello from {{ ProjectName }}!"


if __name__ == "__main__":
    app.run(debug=True, port=5000)
