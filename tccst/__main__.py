from tccst.app import run

run()
