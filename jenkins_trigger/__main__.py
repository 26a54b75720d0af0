from jenkins_trigger.cli.commands import cli_start

if __name__ == "__main__":
    cli_start(prog_name="jenkins-trigger")
