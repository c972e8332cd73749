from audiocutter.app import run

run()
