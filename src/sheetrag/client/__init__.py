"""Client entry points: Flask API and command-line interface."""
