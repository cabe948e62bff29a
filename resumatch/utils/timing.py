import time
from contextlib import contextmanager


@contextmanager
def timer(label: str | None = None, log=None):
	start = time.perf_counter()
	elapsed = lambda: int((time.perf_counter() - start) * 1000)
	yield elapsed
	if label and log is not None:
		log.info("%s took %d ms", label, elapsed())
