from .paths import SeparatorStyle, normalize
from .trim import PrefixTrimmer, trim
from .errors import ErrorCategory, ListingFailure, classify, failure_message
from .format import DisplayRecord, EntryKind, EntryFormatter, format_entry, human_size
from .sinks import ListingSink, TextSink, JsonSink
from .driver import ListingDriver, ListingState, ListingSummary
