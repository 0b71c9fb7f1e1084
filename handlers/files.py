import utils.files as files
from utils.command_helpers import run_command


def count_files_in_directory(directory, fmt):
    return run_command(files.count_files_in_directory, directory, fmt)


def list_files_in_directory(directory, fmt):
    return run_command(files.list_files_in_directory, directory, fmt)


def read_file_base64(path):
    return run_command(files.read_file_base64, path)
