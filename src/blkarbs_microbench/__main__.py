from blkarbs_microbench._cli import run

run()
