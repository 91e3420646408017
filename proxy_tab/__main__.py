import uvicorn

from proxy_tab.vars import HOST, PORT


def main():
    uvicorn.run("proxy_tab.server:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()
