import datetime
import enum
import typing as t
import zrlog
from storls.exc import StorlsError, RecordSerializationError
from storls.storage.base import StorageEntry, ListingItem, RootResolutionError
from storls.util import HaltFlag, HaltInterrupt, is_halted
from .errors import ListingFailure
from .format import DisplayRecord, format_entry
from .paths import SeparatorStyle
from .sinks import ListingSink
from .trim import PrefixTrimmer


class ListingSource(t.Protocol):

    def list(self, recursive: bool = False, include_incomplete: bool = False) -> t.Iterable[ListingItem]:
        raise NotImplementedError


class RootResolver(t.Protocol):

    def resolve_root(self) -> StorageEntry:
        raise NotImplementedError


class ListingState(enum.Enum):

    START = 'start'
    LISTING = 'listing'
    DONE = 'done'
    CANCELLED = 'cancelled'


class ListingSummary:

    def __init__(self):
        self.emitted = 0
        self.failures = 0
        self.serialization_failures = 0
        self.cancelled = False

    def __repr__(self):
        return (
            f"ListingSummary(emitted={self.emitted}, failures={self.failures}, "
            f"serialization_failures={self.serialization_failures}, cancelled={self.cancelled})"
        )


class ListingDriver:
    """Pulls items from a listing source one at a time and turns them into display records.

        The queried root is resolved once, before anything is pulled; failing to resolve it
        raises RootResolutionError. After that, nothing an individual item does can end
        the listing: errors are classified, reported and skipped. Records come out in the
        order the source produced them. When the halt flag is raised, no further items
        are pulled and the driver finishes in the CANCELLED state.
    """

    def __init__(self,
                 source: ListingSource,
                 resolver: RootResolver,
                 sink: t.Optional[ListingSink] = None,
                 style: t.Optional[SeparatorStyle] = None,
                 halt_flag: t.Optional[HaltFlag] = None,
                 tz: t.Optional[datetime.tzinfo] = None):
        self._source = source
        self._resolver = resolver
        self._sink = sink
        self.style = style or SeparatorStyle.for_platform()
        self.tz = tz
        self._halt_flag = halt_flag
        self._log = zrlog.get_logger("storls.listing")
        self.state = ListingState.START
        self.queried_root: t.Optional[StorageEntry] = None

    def _start(self) -> PrefixTrimmer:
        self.state = ListingState.START
        try:
            self.queried_root = self._resolver.resolve_root()
        except RootResolutionError as ex:
            self._log.error(f"Unable to resolve [{ex.location}]: {ex}")
            raise ex
        return PrefixTrimmer(self.queried_root)

    def iterate(self, recursive: bool = False, include_incomplete: bool = False) -> t.Iterable[t.Union[DisplayRecord, ListingFailure]]:
        """Yield a DisplayRecord or a ListingFailure for every item of the listing."""
        if is_halted(self._halt_flag):
            self._log.info("Listing halted before start")
            self.state = ListingState.CANCELLED
            return
        trimmer = self._start()
        self.state = ListingState.LISTING
        items = iter(self._source.list(recursive, include_incomplete))
        while True:
            if is_halted(self._halt_flag):
                self._log.info("Listing halted")
                self.state = ListingState.CANCELLED
                return
            try:
                item = next(items)
            except StopIteration:
                if is_halted(self._halt_flag):
                    self._log.info("Listing halted")
                    self.state = ListingState.CANCELLED
                    return
                break
            except HaltInterrupt:
                self._log.info("Listing halted by source")
                self.state = ListingState.CANCELLED
                return
            if item.error is not None:
                failure = ListingFailure(item.error)
                self._log.warning(f"{failure.message} [{failure.category.value}] {failure.error}")
                yield failure
                continue
            yield format_entry(trimmer.trim(item.entry), self.style, self.tz)
        self.state = ListingState.DONE

    def run(self, recursive: bool = False, include_incomplete: bool = False) -> ListingSummary:
        """List everything into the sink."""
        if self._sink is None:
            raise StorlsError("A sink is required to run a listing", "LISTING", 1000)
        summary = ListingSummary()
        for outcome in self.iterate(recursive, include_incomplete):
            if isinstance(outcome, ListingFailure):
                summary.failures += 1
                self._sink.report_error(outcome)
                continue
            try:
                self._sink.emit(outcome)
                summary.emitted += 1
            except RecordSerializationError as ex:
                self._log.error(f"Unable to serialize record [{outcome.relative_key}]: {ex}")
                summary.serialization_failures += 1
                self._sink.report_serialization_error(outcome, ex)
        summary.cancelled = self.state is ListingState.CANCELLED
        return summary
