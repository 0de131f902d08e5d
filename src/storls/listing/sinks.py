import json
import click
from storls.exc import RecordSerializationError
from .errors import ListingFailure
from .format import DisplayRecord


class ListingSink:
    """Receives the output of a listing."""

    def emit(self, record: DisplayRecord):
        """Present one record. May raise RecordSerializationError."""
        raise NotImplementedError

    def report_error(self, failure: ListingFailure):
        """Report an entry that could not be listed."""
        raise NotImplementedError

    def report_serialization_error(self, record: DisplayRecord, error: RecordSerializationError):
        """Report a record that could not be presented."""
        raise NotImplementedError


class TextSink(ListingSink):
    """Colorized human-readable lines on stdout, errors on stderr."""

    def __init__(self, color: bool = True):
        self.color = color

    def emit(self, record: DisplayRecord):
        click.echo(record.human_line(self.color), color=self.color)

    def report_error(self, failure: ListingFailure):
        self._echo_error(f"{failure.message} {failure.error}")

    def report_serialization_error(self, record: DisplayRecord, error: RecordSerializationError):
        self._echo_error(f"Unable to print record. {error}")

    def _echo_error(self, message: str):
        prefix = click.style("<ERROR>", fg="red", bold=True) if self.color else "<ERROR>"
        click.echo(f"storls: {prefix} {message}", err=True, color=self.color)


class JsonSink(ListingSink):
    """One JSON object per line on stdout, errors as JSON objects on stderr."""

    def emit(self, record: DisplayRecord):
        click.echo(record.to_json())

    def report_error(self, failure: ListingFailure):
        click.echo(json.dumps(failure.to_map()), err=True)

    def report_serialization_error(self, record: DisplayRecord, error: RecordSerializationError):
        click.echo(json.dumps({
            'status': 'error',
            'category': 'serialization',
            'message': "Unable to marshal into JSON.",
            'error': str(error),
            'location': record.relative_key,
        }), err=True)
