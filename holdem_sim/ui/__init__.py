"""User interface layers for the Texas Hold'em simulator."""
