"""Terminal front end: formatter, completion, history and the fsql shell."""
