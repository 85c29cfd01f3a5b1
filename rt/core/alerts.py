from rt.common.logger import log

CUE_KINDS = ("start", "stop", "alarm")


class AlertSink:
    """Where sound cues and expiry notifications go.

    The base class is silent, which is what headless runs and tests want.
    Implementations may raise AlertDispatchFailure (or anything else); callers
    go through ``dispatch_cue``/``dispatch_expired`` which swallow it.
    """

    def cue(self, kind):
        pass

    def notify_expired(self, station_name):
        pass


def dispatch_cue(sink, kind):
    try:
        sink.cue(kind)
    except Exception:
        log.debug(f"Sound cue '{kind}' failed, ignoring.", exc_info=True)

def dispatch_expired(sink, station_name):
    try:
        sink.notify_expired(station_name)
    except Exception:
        log.debug(f"Expiry notification for '{station_name}' failed, ignoring.", exc_info=True)
