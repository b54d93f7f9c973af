class InvalidStateError(RuntimeError):
    """Raised when an operation is called on a patient in the wrong state.

    These are contract violations inside the engine (advancing a finished
    step, routing a patient with an empty plan) and are not recovered from.
    """
