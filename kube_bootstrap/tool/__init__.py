"""Command line tool for kube-bootstrap."""
