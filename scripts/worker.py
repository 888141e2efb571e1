
from stylist.jobs.worker import main


# long-running job worker; same as the `stylist-worker` console script
#   python scripts/worker.py
# stop with Ctrl-C / SIGTERM: the current job finishes first

if __name__ == "__main__":
    main()
