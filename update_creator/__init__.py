"""Update Creator command-line interface."""
