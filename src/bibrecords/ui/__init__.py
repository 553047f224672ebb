"""User interfaces built on top of the bibrecords core."""
