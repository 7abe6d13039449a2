"""Request forms, records and errors of the qBittorrent Web API."""