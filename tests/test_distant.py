import json
import subprocess

import pytest

from lorhammer.distant import DistantDeployer, DistantInstance, DistantRunError


class FakeMqtt:
    address = ""


def new_distant(text):
    return DistantDeployer.from_json(text, FakeMqtt())


def recording_runner(calls):
    def runner(args):
        calls.append(list(args))
        return b""

    return runner


def failing_runner(args):
    raise subprocess.CalledProcessError(1, list(args), output=b"boom")


def test_from_json_empty():
    deployer = new_distant("{}")
    assert deployer.instances == []


def test_from_json_error():
    with pytest.raises(json.JSONDecodeError):
        new_distant("{")


def test_from_json_reads_fields():
    deployer = new_distant(
        '{"instances": [{"sshKeyPath": "/k", "user": "user", "ipServer": "10.0.0.1",'
        ' "pathFile": "/bin/lh", "pathWhereScp": "/tmp", "beforeCmd": "b",'
        ' "afterCmd": "a", "nbDistantToLaunch": 3}]}'
    )
    assert deployer.instances == [
        DistantInstance(
            ssh_key_path="/k",
            user="user",
            ip_server="10.0.0.1",
            path_file="/bin/lh",
            path_where_scp="/tmp",
            before_cmd="b",
            after_cmd="a",
            nb_distant_to_launch=3,
        )
    ]


def test_run_before():
    deployer = new_distant('{ "instances": [ { "beforeCmd": "/", "nbDistantToLaunch": 1 } ] }')
    calls = []
    deployer.runner = recording_runner(calls)
    deployer.run_before()
    assert len(calls) == 1
    assert calls[0][0] == "ssh"
    assert calls[0][-1] == "/"


def test_run_before_error():
    deployer = new_distant('{ "instances": [ {"beforeCmd": "/", "nbDistantToLaunch": 2} ] } ')
    deployer.runner = failing_runner
    with pytest.raises(DistantRunError) as info:
        deployer.run_before()
    assert len(info.value.errors) == 2
    assert str(info.value).count("\n") >= 2


def test_deploy():
    deployer = new_distant('{ "instances": [ {"beforeCmd": "/", "nbDistantToLaunch": 2} ] }')
    calls = []
    deployer.runner = recording_runner(calls)
    deployer.deploy()
    assert len(calls) == 1
    assert calls[0][0] == "scp"


def test_deploy_builds_destination():
    deployer = new_distant(
        '{"instances": [{"user": "user", "ipServer": "host", "pathWhereScp": "/opt",'
        ' "pathFile": "/bin/lh", "sshKeyPath": "/key"}]}'
    )
    calls = []
    deployer.runner = recording_runner(calls)
    deployer.deploy()
    assert calls[0][-2:] == ["/bin/lh", "user@host:/opt"]
    assert calls[0][2:4] == ["-i", "/key"]


def test_deploy_error():
    deployer = new_distant('{ "instances": [ {"beforeCmd": "/", "nbDistantToLaunch": 2} ] }')
    deployer.runner = failing_runner
    with pytest.raises(subprocess.CalledProcessError):
        deployer.deploy()


def test_run_after():
    deployer = new_distant('{ "instances": [ {"afterCmd": "/", "nbDistantToLaunch": 1} ] }')
    calls = []
    deployer.runner = recording_runner(calls)
    deployer.run_after()
    assert [call[0] for call in calls] == ["ssh"]


def test_run_after_error():
    deployer = new_distant('{ "instances": [ {"afterCmd": "/", "nbDistantToLaunch": 2} ] }')
    deployer.runner = failing_runner
    with pytest.raises(DistantRunError) as info:
        deployer.run_after()
    assert len(info.value.errors) == 2
    assert str(info.value).count("\n") >= 2


def test_run_cmd_missing_program_is_collected():
    instance = DistantInstance(user="user", ip_server="host", nb_distant_to_launch=3)

    def runner(args):
        raise FileNotFoundError("no such program")

    with pytest.raises(DistantRunError) as info:
        instance.run_cmd("ls", runner)
    assert len(info.value.errors) == 3
    assert all(isinstance(err, FileNotFoundError) for err in info.value.errors)


def test_distant_run_error_message():
    error = DistantRunError([ValueError("one"), ValueError("two")])
    assert str(error) == "DistantRunError: \n \n one \n two"