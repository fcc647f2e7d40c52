from check_consul.cli import run

run()
