"""Run the kube-bootstrap command line tool with `python -m kube_bootstrap`."""

from kube_bootstrap.tool.kube_bootstrap import main

if __name__ == "__main__":
    main()
