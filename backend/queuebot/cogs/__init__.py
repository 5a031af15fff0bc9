"""Discord extensions loaded by the queue bot."""
