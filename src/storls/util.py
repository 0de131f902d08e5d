import threading
import typing as t


class HaltInterrupt(KeyboardInterrupt):
    pass


class HaltFlag(t.Protocol):

    def check_continue(self, raise_ex: bool = True) -> bool:
        if not self._should_continue():
            if raise_ex:
                raise HaltInterrupt()
            return False
        return True

    def _should_continue(self) -> bool:
        raise NotImplementedError()

    @staticmethod
    def iterate(iterable: t.Iterable, halt_flag=None, raise_ex: bool = True):
        if halt_flag is None:
            yield from iterable
        else:
            for x in iterable:
                if not halt_flag.check_continue(raise_ex):
                    break
                yield x


class EventHaltFlag(HaltFlag):
    """Halt flag backed by a threading.Event; setting the event halts."""

    def __init__(self, event: t.Optional[threading.Event] = None):
        self.event = event or threading.Event()

    def halt(self):
        self.event.set()

    def _should_continue(self) -> bool:
        return not self.event.is_set()


def is_halted(halt_flag: t.Optional[HaltFlag]) -> bool:
    return halt_flag is not None and not halt_flag.check_continue(False)
