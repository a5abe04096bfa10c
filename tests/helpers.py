import threading


def run_in_thread(fn, *args):
    """Run `fn` on another thread (another lock owner) and return its result."""
    result = {}

    def target():
        result["value"] = fn(*args)

    t = threading.Thread(target=target)
    t.start()
    t.join()
    return result["value"]
