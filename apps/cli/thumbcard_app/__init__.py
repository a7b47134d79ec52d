"""Command line front end for the thumbnail card compositor."""
