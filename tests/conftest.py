import os
import tempfile

# rt.common.setup builds its data directories (and the logger opens its files) at import time, so point it at a
# throwaway folder before any test imports rt.
os.environ["RENTALTIMER_HOME"] = tempfile.mkdtemp(prefix="rentaltimer_test_")
