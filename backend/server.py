import uvicorn

def main():
    # 設定の読み込み (必須の環境変数が無ければここで ValidationError になる)
    from config import settings

    # mainモジュールからappオブジェクトを直接インポート
    from main import app

    host, port = settings.server_bind
    print(f"Starting Online Song Library on {host}:{port}...")
    print(f"Log Directory: {settings.LOG_DIR}")
    uvicorn.run(app, host=host, port=port, reload=False, workers=1)

if __name__ == "__main__":
    main()
