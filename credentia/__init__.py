"""credentia: account registration, login and email-verification lifecycle."""

__version__ = "0.1.0"
